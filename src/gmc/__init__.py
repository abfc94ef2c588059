"""GIT Maintenance Complete.

Features:
- Check out the primary branch (main or master)
- Fetch from a remote with pruning
- Find local branches whose remote counterpart is gone
- Dry run and force gating for branch deletion
"""

__version__ = "0.1.0"
