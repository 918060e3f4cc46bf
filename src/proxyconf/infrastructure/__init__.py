"""Infrastructure layer: document model, text reader and writer, config sources.

Only the writer knows the configuration schema (to render it back to text).
"""
