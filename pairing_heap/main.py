import click
import random
import logging
import numpy as np
from time import time
from tqdm import tqdm
from . import config
from .heap import Heap
from .ordering import ascending_by, descending_by, parse_mode, Direction

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

MODE_CHOICES = click.Choice(['min', 'max', 'asc', 'desc'], case_sensitive=False)


def parse_key(raw):
    """numeric keys sort as numbers, everything else as text"""
    for typ in (int, float):
        try:
            return typ(raw)
        except ValueError:
            pass
    return raw


def parse_line(line, delimiter=config.SORT_DELIMITER):
    """parse a `key<delimiter>value` line;
    the value is optional and defaults to ''"""
    line = line.rstrip('\r\n')
    if not line.strip():
        return None
    key, _, value = line.partition(delimiter)
    return parse_key(key.strip()), value


class CountingComparator:
    """three-way comparator that counts how often it is called"""
    def __init__(self):
        self.calls = 0

    def __call__(self, a, b):
        self.calls += 1
        return (a > b) - (a < b)


@click.group()
@click.option('--debug', is_flag=True, help='Log at DEBUG level')
def cli(debug):
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.argument('input', type=click.File('r'), default='-')
@click.option('--mode', type=MODE_CHOICES, default='min', show_default=True)
@click.option('--limit', type=click.IntRange(min=0), default=None,
              help='Only output the first N pairs')
def sort(input, mode, limit):
    """
    Sort `key<TAB>value` lines through a heap.

    Keys that parse as numbers are compared as numbers.
    A line whose key ties the smallest (or largest) key read
    so far comes out before the earlier lines with that key.
    """
    heap = Heap(parse_mode(mode))
    for lineno, line in enumerate(input, 1):
        pair = parse_line(line)
        if pair is None:
            continue
        try:
            heap = heap.put(*pair)
        except TypeError:
            raise click.UsageError(
                'Line {}: key {!r} cannot be compared with earlier keys'.format(lineno, pair[0]))
    logger.info('Read {} pairs'.format(len(heap)))

    if limit is None:
        elements = heap
    else:
        elements, _ = heap.drain(limit)
    for key, value in elements:
        click.echo('{}{}{}'.format(key, config.SORT_DELIMITER, value))


@cli.command()
@click.option('--size', type=click.IntRange(min=1), default=config.BENCH_SIZE, show_default=True)
@click.option('--trials', type=click.IntRange(min=1), default=config.BENCH_TRIALS, show_default=True)
@click.option('--seed', type=int, default=config.RANDOM_SEED, show_default=True)
@click.option('--mode', type=MODE_CHOICES, default='min', show_default=True)
def bench(size, trials, seed, mode):
    """
    Empirically check the amortized cost of pop.

    Inserts `size` shuffled keys, drains them and
    counts comparisons per pop. For a pairing heap
    the mean should stay within a small multiple of log2(size).
    """
    direction = parse_mode(mode).direction
    rng = random.Random(seed)
    per_pop = []
    START = time()

    for trial in range(trials):
        keys = list(range(size))
        rng.shuffle(keys)

        cmp = CountingComparator()
        if direction is Direction.ASCENDING:
            heap = Heap(ascending_by(cmp))
        else:
            heap = Heap(descending_by(cmp))

        for k in keys:
            heap = heap.put(k, trial)
        logger.debug('Trial {}: {} comparisons for {} puts'.format(trial, cmp.calls, size))

        popped = []
        counts = np.zeros(size, dtype=np.int64)
        for i in tqdm(range(size), desc='trial {}'.format(trial)):
            before = cmp.calls
            result = heap.pop()
            counts[i] = cmp.calls - before
            popped.append(result.key)
            heap = result.heap

        expected = sorted(keys, reverse=direction is Direction.DESCENDING)
        if popped != expected or not heap.is_empty():
            raise click.ClickException('Trial {}: keys did not come out in heap order'.format(trial))
        per_pop.append(counts)

    counts = np.concatenate(per_pop)
    log_n = np.log2(size) if size > 1 else 1.
    pcts = np.percentile(counts, config.BENCH_PERCENTILES)

    click.echo('pops:            {}'.format(len(counts)))
    click.echo('log2(size):      {:.2f}'.format(log_n))
    click.echo('mean cmp/pop:    {:.2f} ({:.2f} x log2)'.format(counts.mean(), counts.mean()/log_n))
    click.echo('max cmp/pop:     {}'.format(int(counts.max())))
    for p, v in zip(config.BENCH_PERCENTILES, pcts):
        click.echo('{:<17}{:.0f}'.format('p{} cmp/pop:'.format(p), v))
    logger.info('Benchmark took {:.2f}s'.format(time() - START))


if __name__ == '__main__':
    cli()
