"""minit: a minimal init-style process supervisor.

minit starts a fixed set of children with redirected standard input and
output, restarts any child that exits, reloads its configuration on SIGHUP
and stops everything on SIGTERM.
"""

__version__ = "0.1.0"
