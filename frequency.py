'''Scores candidate plaintexts against byte frequencies seen in a corpus.
A table maps each byte value to the log of how often it occurred; a
candidate's score is the sum over its bytes, with bytes never seen in
the corpus costing UNSEEN_PENALTY.'''
import logging
import math
from collections import Counter
from types import MappingProxyType

logger = logging.getLogger(__name__)

UNSEEN_PENALTY = -3


def _table_from_counts(character_counts):
    return MappingProxyType({
        character: math.log(count) for character, count in character_counts.items()
    })

def build_character_table(corpus):
    '''Builds a read only byte -> log(count) table from the corpus given.
    str input is encoded as utf-8 first.'''
    if isinstance(corpus, str):
        corpus = corpus.encode('utf-8')
    return _table_from_counts(Counter(corpus))

def build_character_table_from_files(paths):
    '''Same as build_character_table but counts across every file given'''
    character_counts = Counter()
    for path in paths:
        logger.info("  %s", path)
        with open(path, 'rb') as corpus_file:
            character_counts.update(corpus_file.read())
    return _table_from_counts(character_counts)

def score(possible_plaintext, character_table):
    '''higher means the bytes look more like the corpus'''
    return sum(character_table.get(byte, UNSEEN_PENALTY) for byte in possible_plaintext)


if __name__ == '__main__':
    import sys

    logging.basicConfig(level=logging.INFO, format='%(message)s')
    table = build_character_table_from_files(sys.argv[1:])
    print(len(table), 'distinct bytes')
    print(score(b'the quick brown fox', table), score(b'\x00\x01\x02\xff', table))
