"""Entity stores, cascade coordination and table administration"""
