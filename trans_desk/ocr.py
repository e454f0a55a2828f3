# trans_desk/ocr.py
"""提供基于 Tesseract（pytesseract + Pillow）的 `ImageTextExtractor` 实现。"""

import io
from pathlib import Path
from typing import Any, Optional, Union

import structlog

from trans_desk.config import OcrConfig
from trans_desk.core.exceptions import OcrExtractionError, OcrNotReadyError

try:
    import pytesseract
    from PIL import Image
except ImportError:  # 可选依赖: pip install "trans-desk[ocr]"
    pytesseract = None
    Image = None

logger = structlog.get_logger(__name__)

ImageRef = Union[str, Path, bytes, "Image.Image"]


class TesseractTextExtractor:
    """
    `ImageTextExtractor` 的 Tesseract 实现。

    `context` 可以是一个语言代码列表（如 ``["eng", "deu"]``），用于覆盖配置中的默认识别语言。
    两个方法都是阻塞的，协调器会在工作线程中调用它们。
    """

    def __init__(self, config: Optional[OcrConfig] = None):
        self.config = config or OcrConfig()
        if pytesseract is not None and self.config.tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self.config.tesseract_cmd

    def _languages(self, context: Optional[Any]) -> list[str]:
        if isinstance(context, (list, tuple)) and context:
            return [str(code) for code in context]
        return list(self.config.languages)

    def _tess_config(self) -> str:
        if self.config.tessdata_dir:
            return f'--tessdata-dir "{self.config.tessdata_dir}"'
        return ""

    def is_ready(self, context: Optional[Any] = None) -> bool:
        """Tesseract 可执行文件可用，且所需语言数据全部已安装时返回 True。"""
        if pytesseract is None:
            logger.warning("未安装 OCR 依赖 (pytesseract / Pillow)。")
            return False
        try:
            pytesseract.get_tesseract_version()
            installed = set(pytesseract.get_languages(config=self._tess_config()))
        except (pytesseract.TesseractNotFoundError, pytesseract.TesseractError, OSError):
            logger.warning("Tesseract OCR 不可用", exc_info=True)
            return False

        missing = [lang for lang in self._languages(context) if lang not in installed]
        if missing:
            logger.warning("缺少 Tesseract 语言数据", missing=missing)
            return False
        return True

    def _open(self, image_ref: ImageRef) -> "Image.Image":
        if isinstance(image_ref, Image.Image):
            return image_ref
        if isinstance(image_ref, bytes):
            return Image.open(io.BytesIO(image_ref))
        return Image.open(Path(image_ref))

    def extract_text(self, context: Optional[Any], image_ref: ImageRef) -> Optional[str]:
        """
        识别图像中的文字；没有识别出任何内容时返回 None。

        图像无法打开或 Tesseract 运行出错时抛出 `OcrExtractionError`。
        """
        if pytesseract is None:
            raise OcrNotReadyError("未安装 OCR 依赖 (pytesseract / Pillow)。")

        try:
            image = self._open(image_ref)
            text = pytesseract.image_to_string(
                image,
                lang="+".join(self._languages(context)),
                config=self._tess_config(),
            )
        except pytesseract.TesseractNotFoundError as e:
            raise OcrNotReadyError(f"找不到 Tesseract 可执行文件: {e}") from e
        except (OSError, pytesseract.TesseractError) as e:
            # PIL.UnidentifiedImageError 是 OSError 的子类
            logger.error("OCR 识别失败", error=str(e))
            raise OcrExtractionError(f"无法识别图像: {e}") from e
        text = text.strip()
        logger.debug("OCR 完成", chars=len(text))
        return text or None
