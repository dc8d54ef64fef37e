"""Query extraction.

The intent layer converts a French transcribed utterance into a `StructuredQuery` (intent, gaine,
time) which is then handed to the inventory router.
"""
