"""Built-in CLI sub-commands for bash-completion-f.

* :mod:`~bashcompf.commands.entries` -- ``add``, ``remove``, ``list``,
  ``clean``, ``add-pc`` and ``add-all-pc``, registered directly on the root
  app.
* :mod:`~bashcompf.commands.config` -- the ``config`` group for viewing and
  modifying global settings.
"""
