"""翻译引擎插件包。`base` 之外的每个模块都会被 `discover_engines` 自动扫描。"""
