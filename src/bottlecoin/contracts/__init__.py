"""
Contracts - artifact loading, ABI encoding and contract binding.
"""
