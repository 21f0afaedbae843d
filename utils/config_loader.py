"""
配置載入器
支援 YAML 配置文件載入和環境變數替換
"""

import copy
import os
import re
import yaml
from pathlib import Path
from typing import Dict, Any, Optional


# ${VAR} 或 $VAR
ENV_PATTERN = re.compile(r'\$(?:\{(?P<braced>[^}]+)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))')

DEFAULT_CONFIG: Dict[str, Any] = {
    'aws': {
        'region': None,
        'endpoint_url': None,
    },
    'gcs': {
        'project': None,
        'retry': {
            'initial': 2.0,
            'maximum': 60.0,
            'multiplier': 3.0,
            'deadline': 600.0,
        },
    },
    'sync': {
        'max_workers': 16,
        'report_interval': 5,
        'chunk_size': 8 * 1024 * 1024,
        'list_page_size': 1000,
    },
    'log': {
        'dir': 'logs',
    },
}


class ConfigLoader:
    """配置載入器"""

    @staticmethod
    def load(config_path: Optional[str] = None) -> Dict[str, Any]:
        """
        載入配置文件（未指定時只使用預設值與環境變數）

        Args:
            config_path: 配置文件路徑

        Returns:
            配置字典

        Raises:
            FileNotFoundError: 配置文件不存在
            ValueError: 配置格式錯誤或缺少必要欄位
        """
        user_config: Dict[str, Any] = {}

        if config_path:
            config_file = Path(config_path)

            if not config_file.exists():
                raise FileNotFoundError(f"配置文件不存在: {config_path}")

            with open(config_file, 'r', encoding='utf-8') as f:
                user_config = yaml.safe_load(f) or {}

            if not isinstance(user_config, dict):
                raise ValueError(f"配置格式錯誤（頂層必須是對應表）: {config_path}")

            # 替換環境變數
            user_config = ConfigLoader._replace_env_vars(user_config)

        config = ConfigLoader._merge(copy.deepcopy(DEFAULT_CONFIG), user_config)

        # 未在配置中指定 region 時沿用 AWS_REGION
        if not config['aws'].get('region'):
            config['aws']['region'] = os.getenv('AWS_REGION')

        # 驗證必要欄位
        ConfigLoader._validate_config(config)

        return config

    @staticmethod
    def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """遞迴合併，override 優先"""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                ConfigLoader._merge(base[key], value)
            else:
                base[key] = value
        return base

    @staticmethod
    def _replace_env_vars(obj: Any) -> Any:
        """遞迴替換配置字串中的 ${VAR} / $VAR"""
        if isinstance(obj, dict):
            return {k: ConfigLoader._replace_env_vars(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [ConfigLoader._replace_env_vars(item) for item in obj]
        if isinstance(obj, str):
            return ENV_PATTERN.sub(ConfigLoader._lookup_env, obj)
        return obj

    @staticmethod
    def _lookup_env(match: re.Match) -> str:
        name = match.group('braced') or match.group('bare')
        value = os.environ.get(name)
        if value is None:
            raise ValueError(f"配置引用的環境變數 {name} 未設定")
        return value

    @staticmethod
    def _validate_config(config: Dict[str, Any]) -> None:
        """
        驗證配置的必要欄位

        Raises:
            ValueError: 配置驗證失敗
        """
        if not config['aws'].get('region'):
            raise ValueError(
                "缺少 AWS region：請設定 AWS_REGION 環境變數或配置中的 aws.region"
            )

        positive_ints = [
            ('sync', 'max_workers'),
            ('sync', 'chunk_size'),
            ('sync', 'list_page_size'),
        ]
        for section, field in positive_ints:
            value = config[section].get(field)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"配置欄位 {section}.{field} 必須是正整數: {value!r}")

        interval = config['sync'].get('report_interval')
        if not isinstance(interval, (int, float)) or interval <= 0:
            raise ValueError(f"配置欄位 sync.report_interval 必須大於 0: {interval!r}")
