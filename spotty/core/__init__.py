"""GUI-agnostic extraction core: archive lookup, markup parsing, decoding, output."""
