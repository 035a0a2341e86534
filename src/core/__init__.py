"""Core domain package for reviewbug.

Core contains the snooze/notice decision logic and option key helpers without
any storage, transport, or rendering code, keeping the business logic portable.
"""
