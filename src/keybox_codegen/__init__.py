"""
keybox_codegen: EC credential extraction for the firmware build.

Reads ecdsa certificates and the private key from a keybox.xml manifest
and regenerates a Rust source file of byte-array constants.

Fallible stages return a Result (see keybox_codegen.domain.result)
instead of raising, so every failure is explicit at the call site.
"""

__version__ = "0.1.0"
