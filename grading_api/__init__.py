"""HTTP service around the grading engine"""
