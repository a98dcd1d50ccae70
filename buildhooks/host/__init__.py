"""Build host interfaces and the in-process host"""
