"""npm command wrappers (install, update, view, version).

Every wrapper validates its untrusted inputs before building a command line
and escapes them as they are joined in.
"""
