"""核心模型、配置与平台目录"""
