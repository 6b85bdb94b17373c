# tests/test_aggregate.py
import random
from collections import Counter

import pytest

from wikifreq.aggregate import count_words_parallel, merge_counts, reduce_counts
from wikifreq.blockio import ArticleBlockReader, ArticleDescriptor, DumpBlock, wrap_fragment
from wikifreq.errors import FormatError

RANDOM_SEED = 2025
WORDS = ["cat", "dog", "the", "a", "bird", "fish", "tree", "river"]


def test_merge_counts_union_and_sum():
    acc = Counter({"cat": 2, "dog": 1})
    out = merge_counts(acc, {"dog": 4, "bird": 1})
    assert out is acc
    assert acc == Counter({"cat": 2, "dog": 5, "bird": 1})


def _random_partition(items, rng):
    items = list(items)
    rng.shuffle(items)
    groups = []
    i = 0
    while i < len(items):
        n = rng.randint(1, 10)
        groups.append(items[i:i + n])
        i += n
    return groups


def test_merge_associative_over_random_partitions():
    rng = random.Random(RANDOM_SEED)
    multiset = [rng.choice(WORDS) for _ in range(500)]
    expected = Counter(multiset)

    for _ in range(50):
        groups = _random_partition(multiset, rng)
        locals_ = [Counter(g) for g in groups]
        # flat reduction
        assert reduce_counts(locals_) == expected
        # random tree-shaped reduction
        tables = [Counter(t) for t in locals_]
        while len(tables) > 1:
            i, j = sorted(rng.sample(range(len(tables)), 2))
            merged = merge_counts(tables[i], tables[j])
            tables = [t for k, t in enumerate(tables) if k not in (i, j)] + [merged]
        assert tables[0] == expected


def _synthetic_blocks(n_blocks, rng):
    blocks, expected = [], Counter()
    pid = 1
    for b in range(n_blocks):
        pages, descs = [], []
        for _ in range(rng.randint(1, 5)):
            words = [rng.choice(WORDS) for _ in range(rng.randint(0, 30))]
            expected.update(words)
            pages.append(f"<page><id>{pid}</id><revision><text>{' '.join(words)}</text></revision></page>")
            descs.append(ArticleDescriptor(1000 + b, pid, f"T{pid}"))
            pid += 1
        blocks.append(DumpBlock(descs, wrap_fragment("".join(pages))))
    return blocks, expected


@pytest.mark.parametrize("workers,max_pending", [(1, 1), (2, 3), (4, None), (8, 2)])
def test_parallel_equals_sequential(workers, max_pending):
    rng = random.Random(RANDOM_SEED + workers)
    blocks, expected = _synthetic_blocks(40, rng)
    vocab = frozenset(WORDS)
    total = count_words_parallel(iter(blocks), vocab, workers=workers,
                                 max_pending=max_pending, verbose=False)
    assert total == expected


def test_vocabulary_filter_applies():
    rng = random.Random(RANDOM_SEED)
    blocks, expected = _synthetic_blocks(10, rng)
    vocab = frozenset({"cat", "river"})
    total = count_words_parallel(blocks, vocab, workers=3, verbose=False)
    assert total == Counter({w: n for w, n in expected.items() if w in vocab})


def test_worker_error_propagates():
    good = DumpBlock([ArticleDescriptor(1, 1, "Good")], wrap_fragment("<page><text>cat</text></page>"))
    bad = DumpBlock([ArticleDescriptor(2, 2, "Bad")], wrap_fragment("<page><text>cat</page>"))
    with pytest.raises(FormatError):
        count_words_parallel([good, bad, good], frozenset({"cat"}), workers=2, verbose=False)


def test_process_pool(make_dump):
    dump, index, _ = make_dump([
        [(1, "A", "cat dog cat"), (2, "B", "dog")],
        [(3, "C", "cat")],
        [(4, "D", "bird")],
    ])
    with ArticleBlockReader(dump, index) as reader:
        total = count_words_parallel(reader, frozenset({"cat", "dog"}), workers=2,
                                     use_processes=True, verbose=False)
    assert total == Counter({"cat": 3, "dog": 2})


def test_progress_lines(capsys):
    rng = random.Random(1)
    blocks, _ = _synthetic_blocks(6, rng)
    count_words_parallel(blocks, frozenset(WORDS), workers=2, progress_every=2)
    err = capsys.readouterr().err
    assert err.count("[Aggregate] blocks=") == 3
    assert "[Aggregate] done" in err
