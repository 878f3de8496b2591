"""
hybrid_index: asynchronous content indexing and hybrid retrieval.

Splits note and thought content into overlapping chunks, queues embedding
jobs with bounded retry, and merges full-text and vector signals into a
single ranked result list.
"""
