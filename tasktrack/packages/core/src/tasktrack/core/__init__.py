"""TaskTrack Core -- 任务领域模型、错误体系与 SQLite 持久化"""
