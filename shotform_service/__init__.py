"""
SHOTFORM Analysis Service

Live basketball shooting form assessment from pose landmarks.
"""
