# trans_desk/core/exceptions.py
"""
本模块定义了 Trans-Desk 项目中所有自定义的、语义化的异常类型。

使用自定义异常可以使错误处理更加精确和清晰，方便上层调用者根据
不同的错误类型执行不同的处理逻辑。
"""


class TransDeskError(Exception):
    """
    所有 Trans-Desk 自定义异常的通用基类。
    捕获此异常可以处理所有源自本项目的预期错误。
    """


class ConfigurationError(TransDeskError):
    """表示在加载、解析或验证配置时发生的错误。"""


class EngineNotFoundError(TransDeskError, KeyError):
    """
    表示尝试访问一个未注册或不可用的翻译引擎时引发的错误。
    继承自 KeyError 是为了保持与字典查找行为的一致性。
    """


class EngineError(TransDeskError):
    """
    表示翻译引擎在网络通信或解析响应时失败。
    例如，服务不可达、返回了错误状态码或无法解析的数据。
    """

    def __init__(self, message: str, engine_name: str | None = None) -> None:
        super().__init__(message)
        self.engine_name = engine_name


class CatalogFetchError(TransDeskError):
    """表示无法从引擎获取支持的语言列表。已缓存的语言状态仍然有效。"""


class OcrNotReadyError(TransDeskError):
    """表示图像文字识别的前置条件（可执行文件、语言数据）尚未满足。"""


class PersistenceError(TransDeskError):
    """
    表示在持久化层操作（如写入历史记录）中发生的错误。
    通常是底层数据库驱动异常的包装。
    """


class OcrExtractionError(TransDeskError):
    """表示图像无法打开或识别失败，例如损坏的图片文件或 Tesseract 运行出错。"""
