import logging

# default log level for the command line;
# --debug switches to DEBUG
LOG_LEVEL = logging.INFO

# seed for shuffling benchmark keys,
# so runs are reproducible
RANDOM_SEED = 0

# number of keys inserted per benchmark trial
BENCH_SIZE = 10000

# number of shuffled insert/drain rounds per benchmark
BENCH_TRIALS = 5

# percentiles of per-pop comparison counts to report
BENCH_PERCENTILES = [50, 90, 99]

# separates key from value in `sort` input lines
SORT_DELIMITER = '\t'
