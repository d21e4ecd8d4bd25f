"""Request execution pipeline: errors, envelope decoding, metadata, executor."""
