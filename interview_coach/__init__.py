"""
Interview Coach - AI-Powered Mock Interview Practice

Asks interview questions aloud, records spoken answers and returns
structured coaching feedback for each one.
"""

__version__ = "0.1.0"
__author__ = "Interview Coach Team"
