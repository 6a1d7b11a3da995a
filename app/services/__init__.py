"""Order lifecycle services"""
