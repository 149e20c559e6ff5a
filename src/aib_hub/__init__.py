"""
Aib HUB - marketplace connecting creative freelancers with clients posting briefs
"""
__version__ = "0.1.0"
