import random
import urllib.parse


class Util:
    @staticmethod
    def is_valid_url(url: str) -> bool:
        """URL 유효성 검사"""
        try:
            result = urllib.parse.urlparse(url)
            return result.scheme in ("http", "https") and bool(result.netloc)
        except ValueError:
            return False

    @staticmethod
    def normalize_url(url: str) -> str:
        """URL 정규화"""
        url = url.strip()
        if not url.startswith(('http://', 'https://')):
            url = 'http://' + url
        return url.rstrip('/')

    @staticmethod
    def host_of(url: str) -> str:
        """URL의 host(:port) 부분"""
        return urllib.parse.urlparse(url).netloc

    @staticmethod
    def encode_query_value(value: str) -> str:
        """쿼리 문자열 값 인코딩 (공백은 '+')"""
        return urllib.parse.quote_plus(value)

    @staticmethod
    def get_random_user_agent() -> str:
        """랜덤 User-Agent 반환"""
        user_agents = [
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
            "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0",
        ]
        return random.choice(user_agents)
