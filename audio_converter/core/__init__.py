"""Core conversion modules.

WHY: The core package contains the stable heart of the converter —
the sample buffer IR, format sniffing, the decode stage with its
synthetic fallback, and the single-file and batch drivers.

HOW: ir.py defines the data structures, sniffer.py classifies raw
bytes, source.py turns bytes into a SampleBuffer, pipeline.py runs one
file end to end, batch.py runs many files with progress reporting.

RULES:
- IR dataclasses are the contract — change with care
- Nothing in core knows about a specific output container
- No exception escapes ConversionPipeline.convert_one()
"""
