"""modsweep - prune unnecessary files from dependency trees.

Finds files and directories inside an installed dependency tree that match
named glob-pattern rulesets, deletes them, and removes the directories
left empty afterwards.
"""

__version__ = "0.1.0"
