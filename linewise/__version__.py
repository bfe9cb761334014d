"""Version information for linewise."""

# Semantic versioning: MAJOR.MINOR.PATCH
# MAJOR: Breaking changes to operation signatures or result models
# MINOR: New operations or options, backward compatible
# PATCH: Bug fixes, backward compatible

__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history:
# 0.3.0 - Multi-line literal search/replace over a bounded line window
#         - find_and_replace highlights replacement text in its preview
#         - remove_lines removes every line a multi-line match spans
# 0.2.0 - Encoding fidelity
#         - BOM bytes kept verbatim, surrogateescape round-trip for stray bytes
#         - ASCII to UTF-8 upgrade when new content needs it
#         - Pinned encodings reject unencodable content instead of transcoding
# 0.1.0 - Initial release
#         - show / contains / insert / replace / remove over a single streaming pass
#         - Atomic temp-file swap with optional timestamped backup
