"""
Client tools for inspecting archives.
"""
