"""Cart validation API"""
