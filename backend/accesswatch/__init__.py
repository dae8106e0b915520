"""
AccessWatch: recurring accessibility audits and score trends.
"""
