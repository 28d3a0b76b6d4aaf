"""Audio Converter — local, in-memory audio re-encoding.

WHY: Users want a re-encoded copy of local audio files in a chosen
container without uploading them anywhere. This package sniffs each
file's container, decodes it to a floating-point sample buffer, and
serializes that buffer into the target container.

HOW: Four-stage pipeline — sniff (magic bytes), decode (pluggable
decoder with a synthetic fallback), encode (pluggable encoders), and a
batch driver that runs the pipeline over many files with progress.

RULES:
- All encoders consume the same SampleBuffer
- Adding a new output container = one new encoder module, no core changes
- A single file's failure never aborts a batch
"""

__version__ = "0.1.0"
