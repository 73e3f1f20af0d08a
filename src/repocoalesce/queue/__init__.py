"""Reference host queue.

An in-memory queue that owns queued build items, serializes triggers
under one lock, and calls the coalescing policy at admission and fold
time.
"""
