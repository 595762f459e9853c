"""
Theme and button preset styling.

colors       hex/HSL conversion
css          stylesheet generation and per-instance scoping
lookup       active-style resolution and cached CSS payloads
service      transactional admin mutations
injection    per-document stylesheet registry
precedence   per-button style resolution
signals      refresh/applied signals
context      browsing contexts and live buttons
"""
