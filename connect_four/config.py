import os


class Config:
    HOST = os.environ.get('CONNECT_FOUR_HOST') or '0.0.0.0'
    PORT = int(os.environ.get('CONNECT_FOUR_PORT', '8080'))
    LOG_LEVEL = os.environ.get('CONNECT_FOUR_LOG_LEVEL', 'INFO')
    # Longest chat line relayed, after trimming whitespace
    MAX_CHAT_LENGTH = int(os.environ.get('CONNECT_FOUR_MAX_CHAT_LENGTH', '500'))
