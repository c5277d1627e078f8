"""
App - session state, view state machine and the bootstrap pipeline.
"""
