"""External services"""
