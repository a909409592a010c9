"""Configuration and prompt templates for visualcodex."""

CONFIG_TEMPLATE = """\
# config.yaml - visualcodex settings
# Ensure this is valid YAML. Every key is optional; defaults are shown.
# api_providers: Map of provider name to API key. The "OpenAI" key is used
#   when present, otherwise the first key listed. When the map is empty the
#   OPENAI_API_KEY environment variable is used.
#   Example:
#     OpenAI: "sk-..."
# default_model: Model id sent to the chat-completion endpoint.
# approval_mode: suggest # Options: suggest, auto-edit, full-auto. Default: suggest.
#   suggest:   File writes and commands are only described, never performed.
#   auto-edit: File writes are applied. Commands are only described.
#   full-auto: File writes are applied and commands are run. USE WITH CAUTION!
# endpoint: Chat-completion URL.
# temperature: Sampling temperature for the model.
# max_tokens: Upper bound on the length of each model reply.
# request_timeout: Seconds to wait for the model endpoint.
# system_prompt: Replaces the built-in instructions. May use {{current_directory}},
#   {{current_time}} and {{current_hostname}}.
# enable_debug: false # Set to true for verbose debugging output

api_providers: {{}}

default_model: "{default_model}"

approval_mode: {approval_mode}

endpoint: "{endpoint}"

temperature: {temperature}
max_tokens: {max_tokens}
request_timeout: {request_timeout}
enable_debug: false
"""

SYSTEM_PROMPT_TEMPLATE = """\
You are VisualCodex, a helpful AI assistant with deep expertise in software development and code analysis.
You are analyzing a repository located at: {current_directory}.

Your goal is to provide insightful, nuanced, and thoughtful responses to questions about this codebase.
Think step-by-step and show your reasoning process openly.

When answering questions:
1. First, gather relevant information about the code (you can read files by writing "Read file: <path>")
2. Analyze the information to form a coherent mental model of the codebase
3. Consider multiple perspectives or approaches before settling on an answer
4. Be curious and identify gaps in your understanding that need further investigation
5. Focus on the most important aspects while acknowledging limitations in your knowledge

When suggesting improvements or solutions:
- Consider trade-offs between different approaches
- Think about maintainability, performance, readability, and security
- Provide reasoning behind your suggestions, not just what to change

You can access the filesystem and execute commands:
- To read files: "Read file: <path>"
- To write files: Use code blocks with file paths: ```<path>
<content>
```
- To execute commands: "Execute: <command>"
- Anything else you write is shown to the user as plain text.

Remember to analyze and reason through problems carefully before answering."""

FOLLOW_UP_PROMPT_TEMPLATE = """\
I've read the files you requested. Here are the contents:

{read_results}

Continue with your reasoning process based on these files. Think step-by-step about what this tells you about the codebase and how it relates to the original question. If you need to see more files to form a complete picture, you can request them."""
