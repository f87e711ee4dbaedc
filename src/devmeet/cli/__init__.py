"""DevMeet command line interface"""
