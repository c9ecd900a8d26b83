"""
Decoder and processing pipeline for the BaseStation (SBS-1) text feed produced by dump1090, fr24feed and similar
ADS-B receivers. The entry point to decoding is `basestation.decoder.decode`, which turns one line of the feed into one
of the message classes in `basestation.message`.
"""


class DecodingError(ValueError):
    """
    Exception raised when a line from the feed cannot be decoded because of its shape or required fields.
    """
