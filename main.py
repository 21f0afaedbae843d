"""
s3-to-gcs - 主入口
將 S3 bucket 單向同步到 GCS bucket
"""

import sys
import argparse

from utils import ConfigLoader, SyncLogger, LogIcons
from core import SyncEngine
from backends import S3Source, GcsDestination


class SyncApplication:
    """同步應用程式"""

    def __init__(self, args: argparse.Namespace):
        """
        初始化應用程式

        Args:
            args: 命令列參數

        Raises:
            ValueError / FileNotFoundError: 配置錯誤
        """
        self.args = args

        # 載入配置
        self.config = ConfigLoader.load(args.config)

        # 初始化日誌
        self.logger = SyncLogger(
            's3-to-gcs',
            log_dir=self.config['log']['dir']
        )

        sync_config = self.config['sync']

        self.source = S3Source(
            bucket=args.s3_bucket,
            region=self.config['aws']['region'],
            endpoint_url=self.config['aws'].get('endpoint_url'),
            page_size=sync_config['list_page_size'],
            chunk_size=sync_config['chunk_size'],
        )

        self.destination = GcsDestination(
            bucket=args.gcs_bucket,
            project=self.config['gcs'].get('project'),
            retry_settings=self.config['gcs'].get('retry'),
        )

    def run(self) -> int:
        """
        執行同步

        Returns:
            程序結束碼
        """
        args = self.args

        self.logger.info(LogIcons.START, f"S3 bucket: {args.s3_bucket}")
        self.logger.info(LogIcons.START, f"GCS bucket: {args.gcs_bucket}")
        if args.prefix:
            self.logger.info(LogIcons.START, f"物件前綴: {args.prefix}")
        self.logger.info(LogIcons.START, f"強制複製: {args.force}")
        if args.dry_run:
            self.logger.info(LogIcons.WARNING, "Dry-run 模式：僅預覽，不實際執行")

        engine = SyncEngine(
            source=self.source,
            destination=self.destination,
            logger=self.logger,
            force=args.force,
            prefix=args.prefix,
            max_workers=self.config['sync']['max_workers'],
            report_interval=self.config['sync']['report_interval'],
            dry_run=args.dry_run,
        )

        try:
            result = engine.run()
        except KeyboardInterrupt:
            self.logger.info(LogIcons.WARNING, "使用者中斷")
            return 130

        return 0 if result.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='s3-to-gcs',
        description='將 S3 bucket 的物件（含所有版本）單向同步到 GCS bucket',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
範例:
  # 同步整個 bucket
  AWS_REGION=ap-northeast-1 s3-to-gcs my-s3-bucket my-gcs-bucket

  # 只同步 images/ 底下的物件
  s3-to-gcs my-s3-bucket my-gcs-bucket images/

  # 略過 ETag 比對，刪除目的端後重新複製
  s3-to-gcs --force my-s3-bucket my-gcs-bucket
        """
    )

    parser.add_argument('s3_bucket', help='來源 S3 bucket')
    parser.add_argument('gcs_bucket', help='目的 GCS bucket')
    parser.add_argument('prefix', nargs='?', default='', help='物件 key 前綴（選填）')

    parser.add_argument(
        '--force',
        action='store_true',
        help='強制複製：略過 ETag 比對，先刪除目的端物件（含所有版本）'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Dry-run 模式：僅輸出決策，不刪除也不複製'
    )

    parser.add_argument(
        '--config',
        default=None,
        help='YAML 配置文件路徑（選填）'
    )

    return parser


def main(argv=None) -> int:
    """主函數"""
    args = build_parser().parse_args(argv)

    try:
        app = SyncApplication(args)
    except Exception as e:
        print(f"❌ 初始化失敗: {e}")
        return 1

    return app.run()


if __name__ == '__main__':
    sys.exit(main())
