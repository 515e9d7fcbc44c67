"""ASTCreate: lossless WAV to Nintendo AST converter.

WHY: Games such as Super Mario Galaxy and Mario Kart: Double Dash!! stream
music from AST containers: 16-bit big-endian PCM split into fixed-size
blocks with a loop point in the header. Authoring tools produce WAV, so a
converter is needed that writes byte-exact AST files from it.

HOW: Three-stage pipeline: read (RIFF/WAVE parser into an AudioSource),
configure (ordered option directives into EncodeOptions), encode (derive the
block layout once, then write header and blocks). Each stage is
independently testable.

RULES:
- The AudioSource record is the stable contract between reading and encoding
- Records are immutable; directives return new EncodeOptions
- Every failure is an AstCreateError subclass raised before output is written
"""

__version__ = "1.2.0"
