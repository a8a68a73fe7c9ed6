"""TaskTrack Gateway -- FastAPI HTTP 接入层"""
