"""Built-in CLI sub-commands for specslice.

This package groups all Typer sub-command modules that form the CLI's
top-level command tree:

* :mod:`~specslice.commands.tags` -- list tags and their endpoints.
* :mod:`~specslice.commands.extract` -- encode a tag-scoped extraction and
  show single schemas.
* :mod:`~specslice.commands.dto` -- generate DTO source code.
* :mod:`~specslice.commands.config` -- view and modify global settings.

Each module either exports a :class:`typer.Typer` sub-application (for
multi-command groups like ``config``) or plain callback functions
registered directly on the root app.
"""
