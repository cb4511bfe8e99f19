# 📄 File: toollender/modules/tool_lending/__init__.py
# 🧭 Purpose (Layman Explanation):
# The part of ToolLender that deals with tools, members and associations.
# 🧪 Purpose (Technical Summary):
# Tool lending module: domain models, repository ports and implementations,
# catalog browsing and application services.
# 🔗 Dependencies:
# toollender.shared
# 🔄 Connected Modules / Calls From:
# toollender.container
