"""
Sync core.

Components:
- client.py: Client (login/logout/sync/download/upload/delete) and setup_client()
- codec.py: task list <-> wire string, optional encryption
- crypto.py: passphrase-based encrypted envelope
- errors.py: HttpError and friends, transport error normalization
- certs.py: TLS certificate helpers
- ports.py: MergeEngine / TaskRepo protocols
"""
