"""
Application Layer

Contains the /play use case and the services it orchestrates.

Structure:
- commands/: PlayTrackCommand and its handler
- services/: query classification, playlist expansion, track resolution,
  requester registry
- interfaces/: Port interfaces for infrastructure adapters
"""
