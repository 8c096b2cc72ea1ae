"""
Editorial Kernel

The article editorial workflow for the nursery CMS:
- Primary moderation state machine (draft -> review -> published/rejected)
- Admin edit-access negotiation layered on the moderation status
- One authorization table shared by every command
- Optimistic concurrency on the article aggregate
"""

__version__ = "0.1.0"
