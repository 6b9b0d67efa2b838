"""Recorder services, leaf-first.

- manifest_parser — HLS media playlist → MediaPlaylist
- segment_filter  — watermark gate over sequence numbers
- metadata_parser — segment title → ParsedMetadata
- classifier      — ParsedMetadata → ContentKind, segment → download candidate
- downloader      — segment URL → (content type, bytes)
- tag_probe       — mutagen tag logging
- dedup_engine    — download, fingerprint, persist
"""
