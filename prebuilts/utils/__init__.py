"""通用工具: shell 调用、YAML 读写、日志"""
