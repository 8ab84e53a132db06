"""respkit：统一的 JSON 编解码、外部 HTTP 结果归一与本地化响应体构建。"""
