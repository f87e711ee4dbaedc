"""DevMeet backend: accounts, matching, connection requests and realtime chat"""
