"""Audio transcoding for the transcription service."""
