"""
Kovar UI 导出核心

模块结构：
- config/     运行期配置加载
- models/     数据模型定义（画布对象/Schema/快照）
- naming/     kovar_id 自动命名
- export/     Schema 派生流水线（树构建/节点映射/组装/HTML渲染）
- editor/     画布对象仓库（编辑器侧协作接口）
- pipeline/   导出编排与产物落盘
"""

__version__ = "0.1.0"
