"""Speech-to-text access.

The transcription resource is quota-limited: every call goes through a shared `RateGate` and
throttling failures are retried with bounded exponential backoff. Callers receive plain transcript
text, or an empty string when transcription is unavailable right now.
"""
