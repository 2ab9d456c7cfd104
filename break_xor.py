'''Breaking repeating key XOR (Vigenere over bytes) without the key.

1. guess key sizes by the normalized hamming distance between the first
   few keysize long blocks of ciphertext, smallest first
2. for each guess, transpose the ciphertext into keysize columns; every
   column was XORed against a single key byte
3. brute force each column's key byte against a frequency table
4. keep the best scoring keys in a bounded KeyCandidates set

Final ranking of the surviving keys is left to the caller through
rank_candidates, which can use either the column scores or a rescore of
the whole decrypted text.'''
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from itertools import combinations
from crypto_errors import CiphertextTooShort
from frequency import score
from xor_util import hamming_distance, repeating_key_xor, xor_single_byte

logger = logging.getLogger(__name__)

KEYSIZE_MIN = 2
KEYSIZE_MAX = 40
NUM_SAMPLE_BLOCKS = 4
NUM_KEYSIZES = 3
MAX_CANDIDATES = 5


class KeyCandidates:
    '''Holds at most max_candidates (key, score) pairs, keeping the highest
    scores. When full, a new key only gets in by beating the current
    minimum, and then exactly one minimum entry is evicted. Which one goes
    when several share the minimum is not defined.'''

    def __init__(self, max_candidates=MAX_CANDIDATES):
        if max_candidates < 1:
            raise ValueError(f"max_candidates must be at least 1, got {max_candidates}")
        self.max_candidates = max_candidates
        self._key2score = {}
        self._lock = threading.Lock()

    def add(self, key, key_score):
        '''returns True if the key was kept'''
        with self._lock:
            if key in self._key2score:
                # same key again, keep whichever score is better
                self._key2score[key] = max(self._key2score[key], key_score)
                return True
            if len(self._key2score) >= self.max_candidates:
                min_key = min(self._key2score, key=self._key2score.get)
                if key_score <= self._key2score[min_key]:
                    return False
                del self._key2score[min_key]
            self._key2score[key] = key_score
            return True

    def merge(self, other):
        for key, key_score in other.items():
            self.add(key, key_score)

    def items(self):
        '''(key, score) pairs, best first'''
        with self._lock:
            pairs = list(self._key2score.items())
        return sorted(pairs, key=lambda pair: pair[1], reverse=True)

    def __len__(self):
        with self._lock:
            return len(self._key2score)

    def __contains__(self, key):
        with self._lock:
            return key in self._key2score

    def __repr__(self):
        return f"KeyCandidates({self.items()!r})"


def break_into_blocks(ciphertext, blocksize):
    '''whole blocks only, a trailing partial block is dropped'''
    return [ciphertext[i:i+blocksize] for i in range(0, len(ciphertext) - blocksize + 1, blocksize)]

def transpose_blocks(ciphertext, keysize):
    '''Column j is byte j of every keysize long group, including the last
    partial group when it is long enough'''
    return [ciphertext[column::keysize] for column in range(keysize)]

def find_keysize_distances(ciphertext, keysize_min=KEYSIZE_MIN, keysize_max=KEYSIZE_MAX,
                           num_blocks=NUM_SAMPLE_BLOCKS):
    '''Returns (normalized distance, keysize) pairs sorted so the most likely
    keysize comes first. Each distance is the average pairwise hamming
    distance between the first num_blocks blocks, divided by the keysize.
    Keysizes without two whole blocks of ciphertext are skipped.'''
    if num_blocks < 2:
        raise ValueError(f"need at least 2 sample blocks, got {num_blocks}")
    distances = []
    for keysize in range(keysize_min, keysize_max + 1):
        blocks = break_into_blocks(ciphertext, keysize)[:num_blocks]
        if len(blocks) < 2:
            continue
        pairs = list(combinations(blocks, 2))
        average = sum(hamming_distance(block1, block2) for block1, block2 in pairs) / len(pairs)
        distances.append((average / keysize, keysize))
    if not distances:
        raise CiphertextTooShort(
            f"{len(ciphertext)} bytes is not two blocks of any keysize in "
            f"{keysize_min}..{keysize_max}")
    return sorted(distances)

def crack_single_byte_xor(ciphertext, character_table):
    '''tries every single byte key, returns (score, plaintext, key byte)
    best first'''
    scores = []
    for candidate_byte in range(256):
        deciphered = xor_single_byte(ciphertext, candidate_byte)
        scores.append((score(deciphered, character_table), deciphered, candidate_byte))
    return sorted(scores, key=lambda entry: entry[0], reverse=True)

def find_single_byte_key(column, character_table):
    '''returns (best score, key byte) for one column. The lowest key byte
    wins a tie'''
    best_score, best_byte = None, 0
    for candidate_byte in range(256):
        candidate_score = score(xor_single_byte(column, candidate_byte), character_table)
        if best_score is None or candidate_score > best_score:
            best_score, best_byte = candidate_score, candidate_byte
    return best_score, best_byte

def recover_key(ciphertext, keysize, character_table):
    '''best key of the given size, and the sum of its column scores'''
    key = bytearray()
    total = 0
    for column in transpose_blocks(ciphertext, keysize):
        column_score, key_byte = find_single_byte_key(column, character_table)
        key.append(key_byte)
        total += column_score
    return bytes(key), total

def _try_keysize(ciphertext, keysize, character_table, candidates):
    key, key_score = recover_key(ciphertext, keysize, character_table)
    kept = candidates.add(key, key_score)
    logger.debug("keysize %d: key %r scored %.2f (kept=%s)", keysize, key, key_score, kept)

def break_repeating_xor(ciphertext, character_table, num_keysizes=NUM_KEYSIZES,
                        max_candidates=MAX_CANDIDATES, keysize_min=KEYSIZE_MIN,
                        keysize_max=KEYSIZE_MAX, workers=None):
    '''Recovers candidate keys for ciphertext encrypted with repeating key
    XOR. The num_keysizes most likely keysizes are each tried and the
    resulting keys go into a KeyCandidates scored by the sum of their
    per-column best scores. With workers set, keysizes are tried in a
    thread pool of that size.'''
    distances = find_keysize_distances(ciphertext, keysize_min, keysize_max)
    keysizes = [keysize for _, keysize in distances[:num_keysizes]]
    logger.debug("trying keysizes %s", keysizes)
    candidates = KeyCandidates(max_candidates)
    if workers:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_keysize = {
                executor.submit(_try_keysize, ciphertext, keysize, character_table, candidates): keysize
                for keysize in keysizes
            }
            for future in as_completed(future_to_keysize):
                future.result()
    else:
        for keysize in keysizes:
            _try_keysize(ciphertext, keysize, character_table, candidates)
    return candidates

def rank_candidates(ciphertext, candidates, character_table, by='plaintext'):
    '''Decrypts ciphertext with every candidate key and returns
    (score, key, plaintext) best first. by='plaintext' rescores the whole
    decryption, by='columns' keeps the score the candidate was stored with.'''
    if by not in ('plaintext', 'columns'):
        raise ValueError(f"by must be 'plaintext' or 'columns', got {by!r}")
    ranked = []
    for key, column_score in candidates.items():
        plaintext = repeating_key_xor(ciphertext, key)
        rank_score = score(plaintext, character_table) if by == 'plaintext' else column_score
        ranked.append((rank_score, key, plaintext))
    return sorted(ranked, key=lambda entry: entry[0], reverse=True)


if __name__ == '__main__':
    import sys
    from frequency import build_character_table_from_files
    from xor_util import read_base64_file

    if len(sys.argv) < 3:
        print(f"usage: {sys.argv[0]} CIPHERTEXT_BASE64_FILE CORPUS_FILE...")
        sys.exit(1)
    logging.basicConfig(level=logging.INFO, format='%(message)s')

    print('Building character table')
    table = build_character_table_from_files(sys.argv[2:])

    bin_blob = read_base64_file(sys.argv[1])

    candidates = break_repeating_xor(bin_blob, table)
    ranked = rank_candidates(bin_blob, candidates, table)
    for rank_score, key, _ in ranked:
        print(round(rank_score, 2), key)
    print(ranked[0][2].decode('latin-1'))
