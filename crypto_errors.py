'''Errors raised by the toolkit. They all derive from ValueError so
callers that only guard on ValueError (like a padding validator) keep
working.'''


class CryptoToolkitError(ValueError):
    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"{self.__class__.__name__}: {self.message}"


class LengthMismatch(CryptoToolkitError):
    '''two buffers that must be the same size are not'''

    def __init__(self, len1, len2):
        super().__init__(f"buffer 1 has size {len1}, but buffer 2 has size {len2}")
        self.len1 = len1
        self.len2 = len2


class InvalidKeySize(CryptoToolkitError):
    pass


class InvalidLength(CryptoToolkitError):
    pass


class InvalidPadding(CryptoToolkitError):
    '''Raised on a malformed PKCS#7 suffix. A short buffer and a wrong
    suffix byte both end up here so the two cases look the same.'''

    def __init__(self, suffix, claimed_length):
        super().__init__(f"bad suffix {suffix!r} from last byte {claimed_length:#04x}")
        self.suffix = suffix
        self.claimed_length = claimed_length


class CiphertextTooShort(CryptoToolkitError):
    pass
