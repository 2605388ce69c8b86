"""
Test suite for the rewards engine.

Focus areas:
- Checkpoint ordering and immutability
- One-shot deposit gating
- Integer-exact reward computation
- Replay determinism and hash chain integrity
"""
