# wikifreq/paths.py

import os

# --- Default input discovery (searched in the current directory) ---
DUMP_PATTERN = r"enwiki-\d+-pages-articles-multistream\.xml\.bz2"
WIKTIONARY_INDEX_PATTERN = r"enwiktionary-\d+-pages-articles-multistream-index\.txt\.bz2"

# --- Dump -> index name derivation ---
DUMP_SUFFIX = ".xml.bz2"
INDEX_SUFFIX = "-index.txt.bz2"

# --- Output ---
OUTPUT_PATH = "frequency_list.txt"

# --- Block reader ---
MAX_DESCRIPTORS_PER_BLOCK = 100   # more than this at one offset means index/dump desync
READ_CHUNK_SIZE = 64 * 1024
WRAPPER_TAG = "dummyroot"

# --- Aggregation ---
DEFAULT_WORKERS = os.cpu_count() or 4
PENDING_PER_WORKER = 4
PROGRESS_EVERY = 1000
